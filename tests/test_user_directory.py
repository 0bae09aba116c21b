"""
Tests for accounts, approval and authentication.
"""

from orderdesk.models import ApprovalStatus, ErrorKind, NotificationKind, Role


def _register(directory, notification_center, email="nuevo@empresa.com", role=Role.USER):
    user = directory.create(email, "secreto", "Nuevo", role=role,
                            status=ApprovalStatus.PENDING).value
    notification_center.create(
        NotificationKind.USER_REGISTRATION,
        "Nuevo usuario registrado",
        f"{user.name} ({user.email}) solicita acceso",
        subject_ref=user.id,
    )
    return user


def test_create_returns_public_user(directory):
    result = directory.create("ana@empresa.com", "clave", "Ana")

    assert result.success
    user = result.value
    assert user.status == ApprovalStatus.APPROVED
    assert not hasattr(user, "password_hash")
    assert "password_hash" not in user.model_dump()
    assert directory.get(user.id) == user


def test_password_is_not_stored_in_plain_text(directory, store):
    directory.create("ana@empresa.com", "clave-secreta", "Ana")

    record = store.read("users")[0]
    assert "clave-secreta" not in str(record)
    assert record["password_hash"]


def test_duplicate_email_is_rejected(directory):
    directory.create("ana@empresa.com", "clave", "Ana")

    result = directory.create("ana@empresa.com", "otra", "Ana Dos")

    assert result.error == ErrorKind.DUPLICATE_EMAIL
    assert len(directory.list()) == 1


def test_create_validates_email(directory):
    assert directory.create("no-es-email", "clave", "Ana").error == ErrorKind.VALIDATION
    assert directory.create("ana@empresa.com", "", "Ana").error == ErrorKind.VALIDATION


def test_authenticate_approved_user(directory):
    directory.create("ana@empresa.com", "clave", "Ana")

    result = directory.authenticate("ana@empresa.com", "clave")

    assert result.success
    assert result.value.email == "ana@empresa.com"


def test_wrong_password_and_unknown_email_share_message(directory):
    directory.create("ana@empresa.com", "clave", "Ana")

    wrong = directory.authenticate("ana@empresa.com", "mala")
    unknown = directory.authenticate("nadie@empresa.com", "clave")

    assert wrong.error == ErrorKind.INVALID_CREDENTIALS
    assert unknown.error == ErrorKind.INVALID_CREDENTIALS
    assert wrong.message == unknown.message == "Email o contraseña incorrectos"


def test_email_match_is_case_sensitive(directory):
    directory.create("ana@empresa.com", "clave", "Ana")
    assert not directory.authenticate("ANA@empresa.com", "clave").success


def test_pending_user_cannot_log_in(directory, notification_center):
    _register(directory, notification_center)

    result = directory.authenticate("nuevo@empresa.com", "secreto")

    assert result.error == ErrorKind.INVALID_CREDENTIALS


def test_pending_admin_can_log_in(directory, notification_center):
    _register(directory, notification_center, email="jefe@empresa.com", role=Role.ADMIN)
    assert directory.authenticate("jefe@empresa.com", "secreto").success


def test_approve_clears_registration_notification(directory, notification_center):
    user = _register(directory, notification_center)
    other = _register(directory, notification_center, email="otro@empresa.com")
    general = notification_center.create(NotificationKind.GENERAL, "Aviso", subject_ref=user.id).value

    result = directory.approve(user.id, "1")

    assert result.success
    approved = directory.get(user.id)
    assert approved.status == ApprovalStatus.APPROVED
    assert approved.approved_by == "1"
    assert approved.approved_at is not None
    remaining = {n.subject_ref: n.kind for n in notification_center.list()}
    assert other.id in remaining
    assert [n.id for n in notification_center.list() if n.subject_ref == user.id] == [general.id]
    assert directory.authenticate("nuevo@empresa.com", "secreto").success


def test_reject_clears_registration_notification(directory, notification_center):
    user = _register(directory, notification_center)

    result = directory.reject(user.id)

    assert result.success
    assert directory.get(user.id).status == ApprovalStatus.REJECTED
    assert notification_center.list() == []
    assert not directory.authenticate("nuevo@empresa.com", "secreto").success


def test_approve_unknown_user(directory):
    assert directory.approve("missing", "1").error == ErrorKind.NOT_FOUND
    assert directory.reject("missing").error == ErrorKind.NOT_FOUND


def test_pending_users_and_delete(directory, notification_center):
    user = _register(directory, notification_center)
    directory.create("ana@empresa.com", "clave", "Ana")

    assert [u.id for u in directory.pending_users()] == [user.id]
    assert directory.find_by_email("ana@empresa.com").name == "Ana"

    assert directory.delete(user.id) is True
    assert directory.delete(user.id) is False
    assert directory.pending_users() == []
