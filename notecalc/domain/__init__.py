"""Record types and form validation rules for notes and calculators."""
