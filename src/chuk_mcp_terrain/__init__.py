"""
chuk-mcp-terrain: Terrain Height & Gradient Lookup MCP Server

Indexes GeoTIFF elevation tiles (loose or inside zip archives) into a
bucketed atlas and answers height and gradient queries for UTM zone 33
coordinates and named Norwegian landmarks.
"""
