#!/usr/bin/env python3
"""
Quick setup verification script
Run this to check if your environment is configured correctly
"""

import sys
import os

def check_python_version():
    """Check Python version"""
    version = sys.version_info
    if version.major < 3 or (version.major == 3 and version.minor < 11):
        print("❌ Python 3.11+ required")
        return False
    print(f"✅ Python {version.major}.{version.minor}.{version.micro}")
    return True

def check_dependencies():
    """Check if required packages are installed"""
    required = [
        'fastapi',
        'uvicorn',
        'sqlalchemy',
        'alembic',
        'firebase_admin',
        'pydantic',
        'pydantic_settings',
        'click',
    ]
    missing = []
    for package in required:
        try:
            __import__(package)
            print(f"✅ {package}")
        except ImportError:
            print(f"❌ {package} - MISSING")
            missing.append(package)
    return len(missing) == 0

def check_env_file():
    """Check if .env file exists"""
    if os.path.exists('.env'):
        print("✅ .env file exists")
        return True
    print("❌ .env file not found")
    print("   Run: cp .env.example .env")
    return False

def check_database():
    """Check that a database is configured and reachable"""
    from app.core.database import database
    from app.core.exceptions import AppException
    from sqlalchemy import text

    if not database.configured:
        print("⚠️  DATABASE_URL not set - API will run without a store")
        return False
    try:
        with database.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        print("✅ Database reachable")
        return True
    except AppException as e:
        print(f"❌ {e.message}")
    except Exception as e:
        print(f"❌ Database not reachable: {e}")
    return False

def check_firebase_credentials():
    """Check if Firebase credentials path exists"""
    from app.core.config import settings
    if settings.firebase_credentials_path and os.path.exists(settings.firebase_credentials_path):
        print(f"✅ Firebase credentials found: {settings.firebase_credentials_path}")
        return True
    print(f"❌ Firebase credentials not found: {settings.firebase_credentials_path}")
    return False

def main():
    print("🔍 Checking PostPlanner Backend Setup...\n")
    
    checks = [
        ("Python Version", check_python_version),
        ("Dependencies", check_dependencies),
        (".env File", check_env_file),
        ("Database", check_database),
        ("Firebase Credentials", check_firebase_credentials),
    ]
    
    results = []
    for name, check_func in checks:
        print(f"\n{name}:")
        results.append(check_func())
    
    print("\n" + "="*50)
    if all(results):
        print("✅ All checks passed! You're ready to run the server.")
        print("\nNext steps:")
        print("  1. Run migrations: alembic upgrade head")
        print("  2. Start server: uvicorn app.main:app --reload")
    else:
        print("❌ Some checks failed. Please fix the issues above.")
        sys.exit(1)

if __name__ == "__main__":
    main()
