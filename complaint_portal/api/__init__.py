"""HTTP layer: legacy ``/api`` handlers and the versioned ``/api/v1`` routers."""
