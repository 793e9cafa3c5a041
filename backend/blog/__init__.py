"""博客后端应用包"""
