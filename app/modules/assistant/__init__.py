"""Asistente de IA: chat con herramientas, recibos, categorización e impuestos"""
