"""Infrastructure layer — dataset files and timer scheduling."""
