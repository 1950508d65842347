"""Batch screening pipeline: partitioning, agents and coordination."""
