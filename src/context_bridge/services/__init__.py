"""Services: platform detection, conversion orchestration, context storage."""
