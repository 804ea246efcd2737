"""FastAPI layer for EduVision."""
