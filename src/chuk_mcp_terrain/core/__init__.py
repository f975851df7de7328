"""Core atlas, tile, coordinate and raster I/O modules."""
