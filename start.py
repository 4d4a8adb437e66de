"""Entry point to run the Dental Bliss API."""

import os
from pathlib import Path

# Load .env file FIRST so settings pick it up
from dotenv import load_dotenv
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)
print(f"✅ Loaded environment from: {env_path}")

import uvicorn  # noqa: E402


def main():
    port = int(os.environ.get("PORT", "3000"))
    reload = os.environ.get("APP_ENV", "development") == "development"

    print("=" * 50)
    print("Starting Dental Bliss API")
    print(f"- API: http://localhost:{port}")
    print(f"- API Docs: http://localhost:{port}/docs")
    print("=" * 50)

    uvicorn.run("bliss_dental.main:app", host="0.0.0.0", port=port, reload=reload)


if __name__ == "__main__":
    main()
