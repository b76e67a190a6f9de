"""Shared pytest configuration."""

import os

# Loggers must not keep the stream of the first CliRunner invocation that
# creates them; set before the package reads its settings.
os.environ.setdefault("IHC_CACHE_LOGGERS", "false")
