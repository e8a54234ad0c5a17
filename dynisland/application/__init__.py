"""Application layer.

Owned services that orchestrate the domain and infrastructure: the stats
sampler loop and the island controller, wired together by the container.

Rule of thumb:
UI -> application (sampler, island controller) -> services/features
"""
