from app import app


def rsvp_form(request):
    """
    HTTP Cloud Function entry point for the RSVP form backend
    """
    with app.request_context(request.environ):
        return app.full_dispatch_request()
