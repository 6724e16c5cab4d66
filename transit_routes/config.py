"""
Configuration settings for the transit route resolver
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple


@dataclass
class APIConfig:
    """OSM API endpoint and request settings"""
    # Main OSM editing API, one entity per request
    osm_api_url: str = "https://www.openstreetmap.org/api/0.6"

    # Request settings
    request_timeout: int = 10  # Per fetch, seconds
    max_retries: int = 3
    retry_delay: float = 1.0

    # Simultaneous HTTP requests across all worker pools
    max_connections: int = 5

    # User agent for API requests
    user_agent: str = "TransitRoutes/1.0"


@dataclass
class CacheConfig:
    """On-disk response cache"""
    cache_dir: Optional[str] = ".cache"  # None disables the cache
    max_age_days: float = 10.0


@dataclass
class ConcurrencyConfig:
    """Worker ceilings, one per fan-out stage"""
    # Sibling relations (and routes during materialization) in flight
    relation_workers: int = 10

    # Node fetches per way
    way_node_workers: int = 3

    # Ways per route; narrow because every way fans out into its nodes
    route_way_workers: int = 1

    # Stop/platform nodes per route
    route_stop_workers: int = 1


@dataclass
class StyleConfig:
    """Presentation rules applied by the geometry assembler"""
    # Exact, case-sensitive role matches
    excluded_way_roles: Tuple[str, ...] = ("platform",)
    wide_route_types: Set[str] = field(default_factory=lambda: {"subway", "light_rail"})
    wide_stroke_width: int = 2
    default_stroke_width: int = 1


@dataclass
class PipelineConfig:
    """Pipeline configuration"""
    # Relations containing the Berlin BVG routes
    default_root_relations: List[int] = field(default_factory=lambda: [
        53181, 18813, 174108, 58584, 18812, 174283, 18812, 174255, 175260
    ])

    # Output settings
    output_dir: str = "output"

    # Memoize nodes and ways for the duration of one run
    share_member_cache: bool = False

    api: APIConfig = field(default_factory=APIConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    concurrency: ConcurrencyConfig = field(default_factory=ConcurrencyConfig)
    style: StyleConfig = field(default_factory=StyleConfig)


# Global config instance
config = PipelineConfig()


def get_config() -> PipelineConfig:
    """Get global configuration"""
    return config


def validate_config(config: PipelineConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    # Required: API config
    if config.api is None:
        errors.append("api configuration is required but not set")
    else:
        if not config.api.osm_api_url:
            errors.append("api.osm_api_url is required but not set")
        if config.api.request_timeout is None or config.api.request_timeout <= 0:
            errors.append(f"api.request_timeout must be positive, got {config.api.request_timeout}")
        if config.api.max_retries is None or config.api.max_retries < 1:
            errors.append(f"api.max_retries must be at least 1, got {config.api.max_retries}")
        if config.api.max_connections is None or config.api.max_connections < 1:
            errors.append(f"api.max_connections must be at least 1, got {config.api.max_connections}")

    # Required: worker ceilings
    if config.concurrency is None:
        errors.append("concurrency configuration is required but not set")
    else:
        for name in ("relation_workers", "way_node_workers", "route_way_workers", "route_stop_workers"):
            value = getattr(config.concurrency, name, None)
            if value is None or value < 1:
                errors.append(f"concurrency.{name} must be at least 1, got {value}")

    if config.cache is not None and config.cache.max_age_days is not None and config.cache.max_age_days < 0:
        errors.append(f"cache.max_age_days must not be negative, got {config.cache.max_age_days}")

    if config.style is None:
        errors.append("style configuration is required but not set")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
