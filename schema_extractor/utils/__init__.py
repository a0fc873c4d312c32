"""
공통 유틸리티 (로거, 입력 검증, 설정, 파일 읽기)
"""
