"""Infrastructure layer — filesystem, subprocess, and database access."""
