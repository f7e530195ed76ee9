# ABOUTME: World status page models
# ABOUTME: Re-exports the page schema and its region, data center and world components

from .page import LogicalDataCenter, PhysicalDataCenter, World, WorldStatusPage

__all__ = ["LogicalDataCenter", "PhysicalDataCenter", "World", "WorldStatusPage"]
