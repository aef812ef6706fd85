#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fxsync_app.config.loader import ConfigLoader
from fxsync_app.errors import ConfigurationError


def main():
    """Validate the effective configuration for a config directory."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)

    print(f"🔍 Validating FXSync configuration in {loader.config_dir}...")

    try:
        config = loader.load()
    except ConfigurationError as e:
        print(f"❌ Found {len(e.errors) or 1} validation errors:")
        for error in e.errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        if not e.errors:
            print(f"  • {e}")
        sys.exit(1)

    print("✅ Configuration is valid")
    print(f"  • API: {config.api.base_url} (timeout {config.api.timeout_seconds}s)")
    print(f"  • Pairs: {', '.join(config.pairs.pairs)} (default {config.pairs.default_pair})")
    print(f"  • History: period {config.history.period}, limit {config.history.limit}")
    print(f"  • Forecast: model {config.forecast.model}, horizon {config.forecast.horizon}")
    print(f"  • Refresh interval: {config.scheduler.refresh_interval_seconds}s")
    sys.exit(0)


if __name__ == "__main__":
    main()
