from django.utils.deprecation import MiddlewareMixin
from .services.access import Principal


class CurrentPrincipalMiddleware(MiddlewareMixin):
    # Run on every request and attach a .principal (role + vendor)
    # built from the logged-in user
    def process_request(self, request):
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            request.principal = Principal.from_user(user)
        else:
            # Unauthenticated users
            request.principal = None
