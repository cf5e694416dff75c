"""Exceptions raised by the data preparation and evaluation steps."""


class DataValidationError(ValueError):
    """ Raised when the input table is missing columns, has non-numeric
    entries or contains missing values
    """


class DegenerateColumnError(ValueError):
    """ Raised when a column has max == min and cannot be rescaled to [0, 1]
    """

    def __init__(self, column, value):
        self.column = column
        self.value = value
        super().__init__(
            f"Column '{column}' is constant ({value}); cannot normalize"
        )


class UndefinedCorrelationError(ValueError):
    """ Raised when Pearson correlation is undefined for the given series
    """
