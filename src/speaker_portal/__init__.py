"""Conference speaker-management portal built as reusable Django apps."""
