import uvicorn

from cryptoboard.core.config import Settings
from cryptoboard.main import create_app

def main() -> None:
    settings = Settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)

if __name__ == "__main__":
    main()
