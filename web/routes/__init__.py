"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounts: 계좌 및 잔액 검증
- transactions: 단일 레그 거래
- transfers: 계좌 간 이체
- monthly_expenses: 월별 고정지출 결제
- recurring_expenses: 고정지출 템플릿
- stats: 재무 통계
"""
