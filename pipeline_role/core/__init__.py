"""Role resolution core: retry, ref matching and mapping/role selection."""
