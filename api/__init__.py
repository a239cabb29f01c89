"""api/ -- FastAPI application, routers, and HTTP transport models for TaskDash."""
