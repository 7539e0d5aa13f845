from django.db import models


class PayoutStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    COMPLETED = "COMPLETED", "Completed"
    REJECTED = "REJECTED", "Rejected"


class SortField(models.TextChoices):
    CREATED_AT = "created_at", "Created at"
    AMOUNT = "amount", "Amount"
    PROCESSED_AT = "processed_at", "Processed at"


class SortOrder(models.TextChoices):
    ASC = "asc", "Ascending"
    DESC = "desc", "Descending"
