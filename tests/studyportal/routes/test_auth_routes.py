from studyportal.models.session import UserSession
from studyportal.models.user import User


def test_health_is_public(client) -> None:
    response = client.get('/api/health')

    assert response.status_code == 200
    assert response.json()['status'] == 'OK'


def test_unknown_route_returns_json_404(client) -> None:
    response = client.get('/api/nothing-here')

    assert response.status_code == 404
    assert response.json() == {'error': 'API endpoint not found'}


def test_login_returns_sanitized_user_and_token(client, student) -> None:
    response = client.post('/api/auth/login', json={'username': 'student_x', 'password': 'Secret123'})

    body = response.json()
    assert response.status_code == 200
    assert body['message'] == 'Login successful'
    assert body['user']['username'] == 'student_x'
    assert body['user']['role'] == 'student'
    assert 'hashed_password' not in body['user']
    assert 'password' not in body['user']
    assert body['token']


def test_wrong_password_twice_creates_no_session(client, db, student) -> None:
    for _ in range(2):
        response = client.post('/api/auth/login', json={'username': 'student_x', 'password': 'Wrong123'})
        assert response.status_code == 401
        assert response.json() == {'error': 'Invalid credentials'}

    assert db.query(UserSession).count() == 0


def test_login_validation_errors_are_collected(client) -> None:
    response = client.post('/api/auth/login', json={'username': 'ab', 'password': '123'})

    body = response.json()
    assert response.status_code == 400
    assert body['error'] == 'Validation failed'
    assert [(detail['path'], detail['msg']) for detail in body['details']] == [
        ('username', 'Username must be between 3 and 50 characters'),
        ('password', 'Password must be at least 6 characters long'),
    ]
    assert all(detail['location'] == 'body' for detail in body['details'])


def test_protected_route_requires_token(client) -> None:
    response = client.get('/api/auth/profile')

    assert response.status_code == 401
    assert response.json() == {'error': 'Access token required'}


def test_malformed_token_is_forbidden(client) -> None:
    response = client.get('/api/auth/profile', headers={'Authorization': 'Bearer garbage'})

    assert response.status_code == 403
    assert response.json() == {'error': 'Invalid token'}


def test_logout_revokes_token(client, student, login) -> None:
    headers = login('student_x')

    assert client.post('/api/auth/logout', headers=headers).json() == {'message': 'Logout successful'}

    response = client.get('/api/auth/profile', headers=headers)
    assert response.status_code == 401
    assert response.json() == {'error': 'Invalid or expired token'}


def test_profile_round_trip(client, student, login) -> None:
    headers = login('student_x')

    response = client.put(
        '/api/auth/profile',
        headers=headers,
        json={'name': '', 'department': ' Physics ', 'semester': '3rd'},
    )
    assert response.status_code == 200
    assert response.json() == {'message': 'Profile updated successfully'}

    user = client.get('/api/auth/profile', headers=headers).json()['user']
    assert user['name'] == 'Student X'
    assert user['department'] == 'Physics'
    assert user['semester'] == '3rd'


def test_profile_update_without_fields_is_rejected(client, student, login) -> None:
    response = client.put('/api/auth/profile', headers=login('student_x'), json={'name': ''})

    assert response.status_code == 400
    assert response.json() == {'error': 'No valid fields to update'}


def test_change_password_revokes_every_session(client, student, login) -> None:
    first = login('student_x')
    second = login('student_x')

    response = client.put(
        '/api/auth/change-password',
        headers=first,
        json={'currentPassword': 'Secret123', 'newPassword': 'Newpass456'},
    )
    assert response.status_code == 200
    assert response.json() == {'message': 'Password changed successfully. Please login again.'}

    assert client.get('/api/auth/profile', headers=first).status_code == 401
    assert client.get('/api/auth/profile', headers=second).status_code == 401
    login('student_x', 'Newpass456')


def test_change_password_with_wrong_current_password(client, student, login) -> None:
    headers = login('student_x')

    response = client.put(
        '/api/auth/change-password',
        headers=headers,
        json={'currentPassword': 'Wrong123', 'newPassword': 'Newpass456'},
    )

    assert response.status_code == 400
    assert response.json() == {'error': 'Current password is incorrect'}
    assert client.get('/api/auth/profile', headers=headers).status_code == 200


def test_register_student_applies_defaults(client, db) -> None:
    response = client.post('/api/auth/register-student', json={
        'name': 'Jane Doe',
        'username': 'jane_doe',
        'password': 'Secret123',
        'confirmPassword': 'Secret123',
    })

    body = response.json()
    assert response.status_code == 201
    assert body['message'] == 'Student registered successfully'
    assert body['user']['role'] == 'student'
    assert body['user']['student_id'].startswith('STU-')

    user = db.query(User).filter(User.username == 'jane_doe').one()
    assert user.department == 'General Studies'
    assert user.division == 'A'
    assert user.semester == '1st'
    assert user.avatar_url.endswith('text=J')


def test_register_student_rejects_duplicates(client, student) -> None:
    payload = {
        'name': 'Jane Doe',
        'username': 'student_x',
        'password': 'Secret123',
        'confirmPassword': 'Secret123',
    }
    response = client.post('/api/auth/register-student', json=payload)
    assert response.status_code == 400
    assert response.json() == {'error': 'Username already exists'}

    payload.update(username='jane_doe', student_id='STU-student_x')
    response = client.post('/api/auth/register-student', json=payload)
    assert response.status_code == 400
    assert response.json() == {'error': 'Student ID already exists'}


def test_register_admin_requires_admin(client, admin, student, login) -> None:
    payload = {'name': 'Second Admin', 'username': 'admin_two', 'password': 'Secret123'}

    assert client.post('/api/auth/register-admin', json=payload).status_code == 401

    response = client.post('/api/auth/register-admin', json=payload, headers=login('student_x'))
    assert response.status_code == 403
    assert response.json() == {'error': 'Insufficient permissions'}

    response = client.post('/api/auth/register-admin', json=payload, headers=login('admin'))
    assert response.status_code == 201
    assert response.json()['user']['role'] == 'admin'
    login('admin_two')


def test_profile_update_cannot_change_role_or_identity(client, db, student, login) -> None:
    headers = login('student_x')

    response = client.put('/api/auth/profile', headers=headers, json={
        'role': 'admin',
        'username': 'someone_else',
        'student_id': 'STU-99999',
        'department': 'Physics',
    })
    assert response.status_code == 200

    user = client.get('/api/auth/profile', headers=headers).json()['user']
    assert user['role'] == 'student'
    assert user['username'] == 'student_x'
    assert user['student_id'] == 'STU-student_x'
    assert user['department'] == 'Physics'
    assert db.query(User).filter(User.role == 'admin').count() == 0


def test_missing_camel_case_fields_are_reported_by_their_json_key(client, student, login) -> None:
    response = client.put(
        '/api/auth/change-password',
        headers=login('student_x'),
        json={'newPassword': 'alllowercase1'},
    )

    assert response.status_code == 400
    assert [(detail['path'], detail['msg']) for detail in response.json()['details']] == [
        ('currentPassword', 'Current password is required'),
        ('newPassword', 'New password must contain at least one uppercase letter, one lowercase letter, and one number'),
    ]

    response = client.post('/api/auth/register-student', json={
        'name': 'Jane Doe',
        'username': 'jane_doe',
        'password': 'Secret123',
    })

    assert response.status_code == 400
    assert [(detail['path'], detail['msg']) for detail in response.json()['details']] == [
        ('confirmPassword', 'Please confirm your password'),
    ]


def test_authorization_header_uses_its_second_word_as_the_token(client) -> None:
    response = client.get('/api/auth/profile', headers={'Authorization': 'Token garbage'})
    assert response.status_code == 403
    assert response.json() == {'error': 'Invalid token'}

    response = client.get('/api/auth/profile', headers={'Authorization': 'Bearer'})
    assert response.status_code == 401
    assert response.json() == {'error': 'Access token required'}
