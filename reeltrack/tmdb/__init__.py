from reeltrack.tmdb.gateway import MetadataGateway

__all__ = ["MetadataGateway"]
