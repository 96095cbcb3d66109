"""HTTP layer: route interceptor, error mapping and routers."""
