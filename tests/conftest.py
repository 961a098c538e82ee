"""
Shared pytest setup: a complete, fake environment so the app factory can
be imported without a real deployment configuration.
"""

from __future__ import annotations

import os

TEST_ENV = {
    "API_KEY": "test-api-key",
    "ADMIN_API_BASE_URL": "https://admin.example.test/api",
    "ADMIN_API_KEY": "admin-key",
    "BROWSERBASE_API_KEY": "bb-key",
    "BROWSERBASE_PROJECT_ID": "bb-project",
    "GEMINI_API_KEY": "gemini-key",
    "CLOUDINARY_CLOUD_NAME": "demo",
    "CLOUDINARY_API_KEY": "cloudinary-key",
    "CLOUDINARY_API_SECRET": "cloudinary-secret",
    "ENVIRONMENT": "test",
}

for _name, _value in TEST_ENV.items():
    os.environ.setdefault(_name, _value)
