from flask import Blueprint, request
from flask_jwt_extended import create_access_token, jwt_required, get_jwt_identity, get_jwt
from sqlalchemy import select
from printdesk import get_db
from printdesk.constants.permissions import ADMIN_PERMISSIONS
from printdesk.errors import AuthorizationError, NotFound, ValidationError
from printdesk.models.admin import AdminUser

auth_bp = Blueprint('auth', __name__)


@auth_bp.post('/login')
def login():
    data = request.get_json(silent=True) or {}
    email = data.get('email'); password = data.get('password')
    if not email or not password:
        raise ValidationError('email & password required')
    session = get_db()
    user = session.execute(select(AdminUser).where(AdminUser.email==email)).scalar_one_or_none()
    if not user or not user.is_active or not user.verify_password(password):
        raise AuthorizationError('invalid credentials', status=401)
    # JWT identity must be a string (flask-jwt-extended v4 requirement)
    token = create_access_token(identity=str(user.id), additional_claims={'perms': ADMIN_PERMISSIONS})
    return {'access_token': token}


@auth_bp.get('/me')
@jwt_required()
def me():
    # Identity stored as string, cast back to int for DB lookup
    user_id = int(get_jwt_identity())
    session = get_db()
    user = session.execute(select(AdminUser).where(AdminUser.id==user_id)).scalar_one_or_none()
    if not user:
        raise NotFound('user not found')
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'perms': get_jwt().get('perms', []),
    }
