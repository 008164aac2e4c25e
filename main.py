import sys
from config import settings
from ui.app import create_app

def main():
    """
    Stock Radar entry point.
    Serves the evaluation dashboard on the local machine.
    """
    mode = "mock data" if settings.USE_MOCK_DATA else ("Gemini" if settings.API_KEY else "no API key")
    print(f"📡 Stock Radar - serving on http://{settings.HOST}:{settings.PORT} ({mode})")
    print(f"📂 Log Directory: {settings.LOGS_DIR}")

    create_app().run(host=settings.HOST, port=settings.PORT, debug=False)

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n🛑 Execution interrupted by user.")
        sys.exit(0)
    except Exception as e:
        print(f"\n🔥 Fatal System Error: {e}")
        sys.exit(1)
