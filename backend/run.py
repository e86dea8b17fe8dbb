#!/usr/bin/env python3
"""
GeoInfo Backend - Run Script
This script starts the FastAPI backend server
"""

import os
import sys
import subprocess
import socket
from pathlib import Path

def print_colored(message, color="blue"):
    """Print colored output"""
    colors = {
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "reset": "\033[0m"
    }
    print(f"{colors.get(color, '')}{message}{colors['reset']}")

def check_file_exists(filepath, error_message):
    if not Path(filepath).exists():
        print_colored(f"❌ Error: {error_message}", "red")
        sys.exit(1)

def check_port_open(host, port):
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.settimeout(2)
    result = sock.connect_ex((host, port))
    sock.close()
    return result == 0

def main():
    print_colored("🚀 Starting GeoInfo Backend...", "blue")

    # Check if we're in the backend directory
    check_file_exists("geoinfo/main.py", "geoinfo/main.py not found. Please run this script from the backend directory.")

    if not Path(".env").exists() and not Path("../.env").exists():
        print_colored("⚠️  Warning: no .env file found, using defaults.", "yellow")
        print("Provider keys are read from these variables:")
        print("  OPENCAGE_API_KEY=your_key_here")
        print("  WEATHERBIT_API_KEY=your_key_here")
        print("  STORAGE_MODE=local  # or mongodb")
        print()

    # MongoDB only matters when it is the configured backend
    storage_mode = os.environ.get("STORAGE_MODE", "local")
    if storage_mode == "mongodb":
        print_colored("🔍 Checking MongoDB connection...", "blue")
        if not check_port_open("localhost", 27017):
            print_colored("⚠️  Warning: MongoDB doesn't appear to be running on localhost:27017", "yellow")
            print("  - Using Docker: docker run -d -p 27017:27017 mongo:7.0")
            response = input("Continue anyway? (y/N): ").strip().lower()
            if response != 'y':
                sys.exit(1)

    print_colored("✅ All checks passed!", "green")
    print_colored("🌐 Starting Uvicorn server...", "blue")
    print("📍 Backend will be available at: http://localhost:8000")
    print("📍 API Health check: http://localhost:8000/health")
    print("📍 API Documentation: http://localhost:8000/docs")
    print()

    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "geoinfo.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", "8000"
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Backend server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
