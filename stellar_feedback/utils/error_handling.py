class ProgramError(Exception):
    def __init__(self, message="Internal inconsistency in the feedback model"):
        self.message = message
        super().__init__(self.message)

class IntegrationError(Exception):
    def __init__(self, message="Quadrature failed to reach the requested tolerance"):
        self.message = message
        super().__init__(self.message)

class InterpolationError(Exception):
    def __init__(self, message="Unable to construct the interpolator from the given knots"):
        self.message = message
        super().__init__(self.message)

class RestartFileError(Exception):
    def __init__(self, message="Restart file is corrupt or truncated"):
        self.message = message
        super().__init__(self.message)

class NotImplementedError(Exception):
    def __init__(self, message="Solution for this setup is not yet implemented"):
        self.message = message
        super().__init__(self.message)
