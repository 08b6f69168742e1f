from django.urls import path

from . import views

app_name = "organizations"

urlpatterns = [
    path("", views.organization_list, name="list"),
    path("new/", views.organization_create, name="create"),
    path("<slug:slug>/", views.organization_detail, name="detail"),
    path("<slug:slug>/edit/", views.organization_update, name="update"),
    path("<slug:slug>/delete/", views.organization_delete, name="delete"),
    path("<slug:slug>/leave/", views.organization_leave, name="leave"),
    path("<slug:slug>/members/add/", views.member_add, name="member-add"),
    path("<slug:slug>/members/<int:member_id>/remove/", views.member_remove, name="member-remove"),
    path("<slug:slug>/members/<int:member_id>/role/", views.member_change_role, name="member-role"),
]
