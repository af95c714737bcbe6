"""Application entry point for FastAPI server."""
import uvicorn

from src.config.settings import get_settings

if __name__ == "__main__":
    settings = get_settings()

    print("\n" + "="*60)
    print("  Photo Upload Gateway v1.0")
    print("="*60)
    print("\nEndpoints:")
    print("  POST /api/upload-photos              - Upload order photos to Drive")
    print("  GET  /api/upload-progress/{uploadId} - Poll batch progress")
    print("  GET  /                               - Liveness message")
    print("  GET  /health                         - Health check")
    print(f"\nAPI Docs: http://localhost:{settings.port}/docs")
    print("="*60 + "\n")

    uvicorn.run(
        "app.app:app",
        host=settings.host,
        port=settings.port,
        log_level="info"
    )
