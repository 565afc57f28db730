"""MCP Simplex: a two-phase tableau simplex solver exposed over MCP."""
