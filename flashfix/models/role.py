# flashfix/models/role.py

import enum


class UserRole(str, enum.Enum):
    """บทบาทของผู้ใช้ในระบบ เก็บเป็น string ในคอลัมน์ tb_users.role"""
    CUSTOMER = "customer"
    TECHNICIAN = "technician"
    ADMIN = "admin"
    FINANCE = "finance"
    SERVICE = "service"
