"""Storage 사용 샘플 애플리케이션"""
