"""Output layer — renders ServiceResult for humans and machines."""
