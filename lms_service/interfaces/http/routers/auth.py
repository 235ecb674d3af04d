from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ....application.use_cases.authenticate_user import AuthenticateUser
from ....application.use_cases.register_user import RegisterUser
from ....infrastructure.db import get_db
from ....infrastructure.rate_limit import LOGIN_LIMIT, SIGNUP_LIMIT, limiter
from ....infrastructure.repositories import UserRepository
from ....infrastructure.security import PasswordHasher, create_access_token
from ..schemas import LoginReq, LoginResp, SignupReq, SignupResp, UserSummary

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/signup", response_model=SignupResp, status_code=status.HTTP_201_CREATED)
@limiter.limit(SIGNUP_LIMIT)
def signup(request: Request, payload: SignupReq, db: Session = Depends(get_db)):
    uc = RegisterUser(repo=UserRepository(db), hasher=PasswordHasher(), tx=db)
    user = uc.execute(payload.name, payload.email, payload.password)
    return SignupResp(message="User created successfully", user=UserSummary.model_validate(user))


@router.post("/login", response_model=LoginResp)
@limiter.limit(LOGIN_LIMIT)
def login(request: Request, payload: LoginReq, db: Session = Depends(get_db)):
    uc = AuthenticateUser(repo=UserRepository(db), hasher=PasswordHasher())
    user = uc.execute(payload.email, payload.password)
    token = create_access_token(sub=str(user.id), email=user.email, role=user.role)
    return LoginResp(message="Login successful", token=token, user=UserSummary.model_validate(user))
