"""AlumniLink mentorship service."""
