"""
Run the visit counter.

Usage:
    python -m visit_counter_app
"""

import uvicorn

from visit_counter_app.config import get_settings


def main():
    settings = get_settings()
    print("=" * 60)
    print(f"🔧 {settings.app_name} {settings.app_version}")
    print("=" * 60)
    print(f"Environment: {settings.environment}")
    print(f"Counter backend: {settings.cache_backend}")
    print(f"Queue backend: {settings.queue_backend}")
    print(f"Stream backend: {settings.stream_backend}")
    print("=" * 60)

    uvicorn.run(
        "visit_counter_app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
