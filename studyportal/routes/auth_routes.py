from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from studyportal.auth import sessions
from studyportal.auth.dependencies import CurrentUser, get_current_user, require_admin
from studyportal.database import get_db
from studyportal.schemas.auth import (
    AdminRegistrationRequest,
    LoginRequest,
    LoginResponse,
    PasswordChangeRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisteredUserResponse,
    RegistrationResponse,
    StudentRegistrationRequest,
    UserResponse,
)
from studyportal.schemas.common import MessageResponse
from studyportal.services import accounts

router = APIRouter(tags=['auth'])


@router.post('/login', response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user, token = sessions.authenticate(db, data.username, data.password)
    return LoginResponse(
        message='Login successful',
        user=UserResponse.model_validate(user),
        token=token,
    )


@router.post('/logout', response_model=MessageResponse)
def logout(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    sessions.revoke(db, current_user.token)
    return MessageResponse(message='Logout successful')


@router.get('/profile', response_model=ProfileResponse)
def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = accounts.get_user(db, current_user.id)
    return ProfileResponse(user=UserResponse.model_validate(user))


@router.put('/profile', response_model=MessageResponse)
def update_profile(
    data: ProfileUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    accounts.update_profile(db, current_user.id, data)
    return MessageResponse(message='Profile updated successfully')


@router.put('/change-password', response_model=MessageResponse)
def change_password(
    data: PasswordChangeRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = accounts.get_user(db, current_user.id)
    sessions.change_password(db, user, data.current_password, data.new_password)
    return MessageResponse(message='Password changed successfully. Please login again.')


@router.post('/register-student', response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def register_student(data: StudentRegistrationRequest, db: Session = Depends(get_db)):
    user = accounts.register_student(db, data)
    return RegistrationResponse(
        message='Student registered successfully',
        user=RegisteredUserResponse.model_validate(user),
    )


@router.post('/register-admin', response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def register_admin(
    data: AdminRegistrationRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = accounts.register_admin(db, data, created_by=current_user.id)
    return RegistrationResponse(
        message='Admin registered successfully',
        user=RegisteredUserResponse.model_validate(user),
    )
