class ScheduleError(Exception):
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class MissingParameterError(ScheduleError):
    status_code = 400


class InvalidDateError(ScheduleError):
    status_code = 400


class FetchError(ScheduleError):
    status_code = 400

    def __init__(self, message, upstream_status=None):
        super().__init__(message)
        self.upstream_status = upstream_status


class CalendarParseError(FetchError):
    pass


class ConversionError(ScheduleError):
    status_code = 500


class TimezoneResolutionWarning(UserWarning):
    pass
