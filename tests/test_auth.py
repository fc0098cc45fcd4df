"""
Authentication and profile endpoint tests.

Test Coverage:
- Sign up restricted to the campus email domain
- Sign in with uniform 401 on any failure
- Refresh token rotation and blacklisting
- Logout through the token blacklist
- Current user and profile updates
- Staff verification of students
"""

import uuid

import pytest
from django.contrib.auth import authenticate
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken

from core.models import User
from factories import PASSWORD, auth_client, create_student

pytestmark = pytest.mark.django_db


@pytest.fixture
def signup_data():
    return {
        'email': 'kofi.boateng@st.knust.edu.gh',
        'password': PASSWORD,
        'confirm_password': PASSWORD,
        'first_name': 'Kofi',
        'last_name': 'Boateng',
        'student_id': '20241234',
        'phone_number': '0241234567',
        'gender': 'male',
        'programme_of_study': 'Computer Engineering',
        'current_year': 2,
    }


# ============================================================================
# 1. SIGN UP
# ============================================================================

class TestSignUp:

    def test_signup_creates_pending_student(self, api_client, signup_data):
        response = api_client.post(reverse('signup'), signup_data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'User created successfully'
        assert response.data['user']['email'] == 'kofi.boateng@st.knust.edu.gh'
        assert response.data['user']['verification_status'] == 'pending'
        assert 'password' not in response.data['user']

        user = User.objects.get(email='kofi.boateng@st.knust.edu.gh')
        assert user.check_password(PASSWORD)
        assert not user.is_verified_student()
        assert not user.is_staff

    def test_email_is_lowercased(self, api_client, signup_data):
        signup_data['email'] = 'Kofi.Boateng@ST.KNUST.EDU.GH'

        response = api_client.post(reverse('signup'), signup_data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.filter(email='kofi.boateng@st.knust.edu.gh').exists()

    def test_non_campus_email_rejected(self, api_client, signup_data):
        signup_data['email'] = 'kofi@gmail.com'

        response = api_client.post(reverse('signup'), signup_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'email' in response.data['details']
        assert 'error' in response.data

    def test_duplicate_email_rejected(self, api_client, signup_data):
        create_student('kofi.boateng')

        response = api_client.post(reverse('signup'), signup_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'email' in response.data['details']

    def test_duplicate_student_id_rejected(self, api_client, signup_data):
        create_student(student_id='20241234')

        response = api_client.post(reverse('signup'), signup_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'student_id' in response.data['details']

    def test_password_mismatch_rejected(self, api_client, signup_data):
        signup_data['confirm_password'] = 'SomethingElse123!'

        response = api_client.post(reverse('signup'), signup_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'confirm_password' in response.data['details']

    def test_weak_password_rejected(self, api_client, signup_data):
        signup_data['password'] = signup_data['confirm_password'] = '12345'

        response = api_client.post(reverse('signup'), signup_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data['details']

    def test_invalid_phone_rejected(self, api_client, signup_data):
        signup_data['phone_number'] = 'call me'

        response = api_client.post(reverse('signup'), signup_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'phone_number' in response.data['details']

    def test_privileged_fields_ignored(self, api_client, signup_data):
        signup_data.update({'is_staff': True, 'verification_status': 'approved'})

        response = api_client.post(reverse('signup'), signup_data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        user = User.objects.get(email=signup_data['email'])
        assert not user.is_staff
        assert user.verification_status == User.VerificationStatus.PENDING

    @pytest.mark.parametrize('field', ['email', 'password', 'first_name', 'student_id', 'phone_number'])
    def test_required_fields(self, api_client, signup_data, field):
        signup_data.pop(field)

        response = api_client.post(reverse('signup'), signup_data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert field in response.data['details']


# ============================================================================
# 2. SIGN IN
# ============================================================================

class TestSignIn:

    def test_signin_returns_tokens(self, api_client, traveler):
        response = api_client.post(
            reverse('signin'),
            {'email': traveler.email, 'password': PASSWORD},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
        assert 'refresh' in response.data
        assert response.data['user']['id'] == str(traveler.id)

    def test_signin_is_case_insensitive(self, api_client, traveler):
        response = api_client.post(
            reverse('signin'),
            {'email': traveler.email.upper(), 'password': PASSWORD},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK

    def test_wrong_password_and_unknown_email_look_the_same(self, api_client, traveler):
        wrong_password = api_client.post(
            reverse('signin'),
            {'email': traveler.email, 'password': 'WrongPass123!'},
            format='json'
        )
        unknown_email = api_client.post(
            reverse('signin'),
            {'email': 'nobody@st.knust.edu.gh', 'password': PASSWORD},
            format='json'
        )

        assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
        assert unknown_email.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong_password.data == unknown_email.data == {'error': 'Invalid credentials'}

    def test_inactive_account_rejected(self, api_client):
        user = create_student(is_active=False)

        response = api_client.post(
            reverse('signin'),
            {'email': user.email, 'password': PASSWORD},
            format='json'
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_missing_password_rejected(self, api_client, traveler):
        response = api_client.post(reverse('signin'), {'email': traveler.email}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_email_backend_authenticates(self, traveler):
        assert authenticate(email=traveler.email.upper(), password=PASSWORD) == traveler
        assert authenticate(email=traveler.email, password='wrong') is None


# ============================================================================
# 3. TOKEN REFRESH AND LOGOUT
# ============================================================================

class TestTokenLifecycle:

    def test_refresh_rotates_token(self, api_client, traveler):
        refresh = str(RefreshToken.for_user(traveler))

        response = api_client.post(reverse('token_refresh'), {'refresh': refresh}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
        assert response.data['refresh'] != refresh

    def test_rotated_token_cannot_be_reused(self, api_client, traveler):
        refresh = str(RefreshToken.for_user(traveler))
        api_client.post(reverse('token_refresh'), {'refresh': refresh}, format='json')

        response = api_client.post(reverse('token_refresh'), {'refresh': refresh}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert 'error' in response.data

    def test_garbage_token_rejected(self, api_client):
        response = api_client.post(reverse('token_refresh'), {'refresh': 'not-a-token'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_missing_refresh_field(self, api_client):
        response = api_client.post(reverse('token_refresh'), {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_logout_blacklists_refresh_token(self, api_client, traveler):
        refresh = str(RefreshToken.for_user(traveler))

        response = api_client.post(reverse('logout'), {'refresh': refresh}, format='json')
        assert response.status_code == status.HTTP_200_OK

        response = api_client.post(reverse('token_refresh'), {'refresh': refresh}, format='json')
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_logout_with_invalid_token(self, api_client):
        response = api_client.post(reverse('logout'), {'refresh': 'not-a-token'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert 'error' in response.data


# ============================================================================
# 4. PROFILE
# ============================================================================

class TestProfile:

    def test_me_returns_profile(self, traveler, traveler_client):
        response = traveler_client.get(reverse('me'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['email'] == traveler.email
        assert response.data['user']['profile_image_url'] is None
        assert 'password' not in response.data['user']

    def test_me_requires_authentication(self, api_client):
        response = api_client.get(reverse('me'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert set(response.data) == {'error'}

    def test_patch_updates_allowed_fields_only(self):
        student = create_student(verified=False)
        client = auth_client(student)
        original_email = student.email

        response = client.patch(reverse('update_profile'), {
            'first_name': 'Abena',
            'programme_of_study': 'Pharmacy',
            'email': 'someone.else@st.knust.edu.gh',
            'verification_status': 'approved',
            'is_staff': True,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Profile updated successfully'
        student.refresh_from_db()
        assert student.first_name == 'Abena'
        assert student.programme_of_study == 'Pharmacy'
        assert student.email == original_email
        assert student.verification_status == User.VerificationStatus.PENDING
        assert not student.is_staff

    def test_invalid_phone_rejected(self, traveler_client):
        response = traveler_client.patch(reverse('update_profile'), {'phone_number': '12'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'phone_number' in response.data['details']

    def test_current_year_out_of_range(self, traveler_client):
        response = traveler_client.patch(reverse('update_profile'), {'current_year': 12}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# ============================================================================
# 5. STUDENT VERIFICATION
# ============================================================================

class TestStudentVerification:

    @pytest.fixture
    def staff_client(self):
        return auth_client(create_student('registrar', is_staff=True))

    def test_staff_approves_student(self, staff_client):
        student = create_student(verified=False)

        response = staff_client.post(
            reverse('verify_student'),
            {'user_id': str(student.id), 'status': 'approved'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['verification_status'] == 'approved'
        student.refresh_from_db()
        assert student.is_verified_student()

    def test_staff_rejects_student(self, staff_client):
        student = create_student(verified=False)

        response = staff_client.post(
            reverse('verify_student'),
            {'user_id': str(student.id), 'status': 'rejected'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        student.refresh_from_db()
        assert student.verification_status == User.VerificationStatus.REJECTED

    def test_non_staff_forbidden(self, traveler_client, requester):
        response = traveler_client.post(
            reverse('verify_student'),
            {'user_id': str(requester.id), 'status': 'rejected'},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_user(self, staff_client):
        response = staff_client.post(
            reverse('verify_student'),
            {'user_id': str(uuid.uuid4()), 'status': 'approved'},
            format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'error': 'User not found'}

    def test_invalid_status(self, staff_client, requester):
        response = staff_client.post(
            reverse('verify_student'),
            {'user_id': str(requester.id), 'status': 'pending'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
