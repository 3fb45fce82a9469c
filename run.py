import uvicorn

from dotenv import load_dotenv, find_dotenv

env_path = find_dotenv()
if env_path:
    load_dotenv(env_path, override=False)

# Settings read the environment at import time, so import after loading .env
from quickvote.core.config import settings  # noqa: E402

if __name__ == "__main__":
    uvicorn.run(
        "quickvote.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
    )
