"""Turn orchestration and bootstrapping for screening conversations."""
