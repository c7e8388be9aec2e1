"""Tools for a swarm of Minecraft bots: protocol codec, geometry, blocks, chat and path finding."""

__version__ = "0.1.0"