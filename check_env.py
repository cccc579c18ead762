#!/usr/bin/env python3
"""Quick script to check which configuration the webhook service will start with."""
from src.config import ENVIRONMENT, get_settings

settings = get_settings()

print(f"Environment: {ENVIRONMENT}")
for name, value in settings.redacted().items():
    print(f"{name}: {value}")

missing = settings.missing_required()
if missing:
    print(f"❌ Missing: {', '.join(missing)}")
else:
    print("✅ All required variables set")
