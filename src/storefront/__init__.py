"""QuickCart storefront domain."""
