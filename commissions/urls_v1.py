from django.urls import path

from .views import (
    CalculateCommissionV1,
    CommissionHistoryV1,
    CommissionStatsV1,
    CurrentCommissionV1,
    ResetCommissionV1,
)

urlpatterns = [
    path("current/", CurrentCommissionV1.as_view(), name="v1-commission-current"),
    path("reset/", ResetCommissionV1.as_view(), name="v1-commission-reset"),
    path("history/", CommissionHistoryV1.as_view(), name="v1-commission-history"),
    path("calculate/", CalculateCommissionV1.as_view(), name="v1-commission-calculate"),
    path("stats/", CommissionStatsV1.as_view(), name="v1-commission-stats"),
]
