"""Institute site API: database schema, repositories and routers."""
