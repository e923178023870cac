"""DXT texture block compression: colour sets, colour fitters and alpha blocks."""

__all__ = ["maths", "colourset", "colourblock", "alpha", "colourfit", "rangefit", "clusterfit"]