from rest_framework import permissions

from .models import Profile


class HasRole(permissions.BasePermission):
    """
    Permission to only allow profiles whose role is in ``allowed_roles``
    """
    allowed_roles = ()
    message = 'Your role does not allow this action.'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return getattr(request.user, 'role', None) in self.allowed_roles


class IsCustomer(HasRole):
    """
    Permission to only allow customers (cart and order placement)
    """
    allowed_roles = (Profile.Role.CUSTOMER,)
    message = 'Only customers can do this.'


class IsEmployee(HasRole):
    """
    Permission to only allow employees (order fulfilment)
    """
    allowed_roles = (Profile.Role.EMPLOYEE,)
    message = 'Only employees can update order status.'


class IsAdmin(HasRole):
    """
    Permission to only allow admins (sales reporting)
    """
    allowed_roles = (Profile.Role.ADMIN,)
    message = 'Only admins can view sales analytics.'


class IsStaffMember(HasRole):
    """
    Employees and admins, who may see every order
    """
    allowed_roles = (Profile.Role.EMPLOYEE, Profile.Role.ADMIN)


class IsOrderOwnerOrStaff(permissions.BasePermission):
    """
    Object-level permission: customers only reach their own orders
    """
    def has_object_permission(self, request, view, obj):
        if request.user.role in (Profile.Role.EMPLOYEE, Profile.Role.ADMIN):
            return True
        return obj.customer_id == request.user.id
