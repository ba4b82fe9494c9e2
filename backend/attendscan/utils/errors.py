"""Error taxonomy shared by services and the HTTP layer."""

class AttendanceError(Exception):
    """Base class for every error surfaced to API callers."""
    
    code = 'error'
    status_code = 400
    default_message = 'Request failed'
    
    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

class InvalidInput(AttendanceError):
    """Malformed request; the caller must correct it."""
    code = 'invalid_input'
    status_code = 400
    default_message = 'Invalid input'

class NotAuthenticated(AttendanceError):
    """No usable caller identity."""
    code = 'not_authenticated'
    status_code = 401
    default_message = 'Authentication required'

class PermissionDenied(AttendanceError):
    code = 'permission_denied'
    status_code = 403
    default_message = 'You do not have access to this resource'

class RedemptionRejected(AttendanceError):
    """A domain rejection of a redemption attempt. Never retried automatically."""
    code = 'redemption_rejected'

class InvalidPayload(RedemptionRejected):
    code = 'invalid_payload'
    status_code = 400
    default_message = 'Invalid QR code or session code'

class SessionNotFound(RedemptionRejected):
    code = 'session_not_found'
    status_code = 404
    default_message = 'No attendance session matches this code'

class SessionExpired(RedemptionRejected):
    code = 'session_expired'
    status_code = 410
    default_message = 'This attendance session has expired'

class AlreadyMarked(RedemptionRejected):
    code = 'already_marked'
    status_code = 409
    default_message = 'Attendance already marked for this session'

class NotAStudent(RedemptionRejected):
    code = 'not_a_student'
    status_code = 403
    default_message = 'Only students can mark attendance'

class NotEnrolled(RedemptionRejected):
    code = 'not_enrolled'
    status_code = 403
    default_message = 'You are not enrolled in this course and section'

class CodeAllocationFailed(AttendanceError):
    code = 'code_allocation_failed'
    status_code = 503
    default_message = 'Could not allocate a unique session code, try again'

class StoreUnavailable(AttendanceError):
    """Transient storage failure. Nothing was committed, so retrying is safe."""
    code = 'store_unavailable'
    status_code = 503
    default_message = 'Attendance store is unavailable, try again'
