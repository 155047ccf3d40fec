# 리포지토리(영속성 게이트웨이) 계층의 예외

class PersistenceError(Exception):
    """저장소 접근(전송/저장) 중 오류가 발생했을 때"""
    pass

class DuplicateRecordError(PersistenceError):
    """유니크 제약 조건(조직 이름, 소유자 이메일 등)을 위반하는 쓰기가 거부되었을 때"""
    pass
