"""
Application entry point
File khởi chạy ứng dụng Flask
"""
import os

from dotenv import load_dotenv

load_dotenv()

from app import create_app  # noqa: E402  (cần đọc .env trước khi nạp app.config)


def main():
    app = create_app()

    # Lấy cấu hình từ environment variables
    host = os.getenv('FLASK_HOST', '0.0.0.0')
    port = int(os.getenv('FLASK_PORT', 3001))
    debug = os.getenv('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes')

    app.logger.info(f"🚀 Starting Flask application on {host}:{port}")
    app.logger.info(f"🔧 Debug mode: {debug}")

    app.run(
        host=host,
        port=port,
        debug=debug,
        threaded=True
    )


if __name__ == '__main__':
    main()
