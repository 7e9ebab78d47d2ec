import os

from dotenv import load_dotenv

load_dotenv(os.getenv("NEWSDIGEST_DOTENV", ".env"))

from app import app  # noqa: E402
from app_utils import get_env  # noqa: E402
from utils.security import is_configured_key  # noqa: E402

if __name__ == '__main__':
    host = get_env('HOST', '127.0.0.1')
    port = int(get_env('PORT', '5000'))
    debug = (get_env('DEBUG', 'False') or '').lower() == 'true'

    services = app.extensions["news_services"]
    print(f"Starting NewsDigest on {host}:{port}")
    print("API Status Check:")
    print(f"  News provider configured: {is_configured_key(services.settings.news_api_key)}")
    print(f"  Summarization engine: {services.summarizer.engine.name}")

    if services.summarizer.engine.name == "unavailable":
        print("\n[WARN] No summarization key; summaries will use fallback text.")

    print(f"\nAccess URL: http://{host}:{port}/api/articles")

    app.run(host=host, port=port, debug=debug, threaded=True)
