"""Back office dashboard."""

from django.views import View

from sanatoni.core.pages import render_page

from ..mixins import BackofficeMixin
from .. import services


class DashboardView(BackofficeMixin, View):
    """Business overview for admins and managers."""

    def get(self, request):
        return render_page(request, "Admin/Dashboard", {
            "stats": services.business_stats(),
            "userStats": services.user_stats(),
            "salesData": services.monthly_sales(),
            "weeklySales": services.weekly_sales(),
            "topCategories": services.top_categories(),
            "recentOrders": services.recent_orders(),
            "orderStatusDistribution": services.order_status_distribution(),
        })
