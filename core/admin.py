from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
	AdminEarning,
	Amenity,
	Booking,
	Conversation,
	Coupon,
	DisplayCategory,
	MemberStatusTier,
	OwnerPayout,
	Payment,
	Property,
	PropertyImage,
	PropertyOwnerProfile,
	PropertyReport,
	PropertyType,
	Review,
	RewardsPointSettings,
	RewardsPointSlot,
	RewardsPointTransaction,
	SystemSetting,
	User,
	UserRewardsPoints,
)


@admin.register(User)
class CustomUserAdmin(BaseUserAdmin):
	list_display = ('username', 'email', 'user_type', 'phone', 'is_active', 'is_staff')
	list_filter = BaseUserAdmin.list_filter + ('user_type',)
	fieldsets = BaseUserAdmin.fieldsets + (
		('Additional Information', {'fields': ('user_type', 'phone', 'date_of_birth', 'profile_image')}),
	)
	add_fieldsets = BaseUserAdmin.add_fieldsets + (
		(
			'Additional Information',
			{
				'classes': ('wide',),
				'fields': ('email', 'user_type', 'phone'),
			},
		),
	)


class PropertyImageInline(admin.TabularInline):
	model = PropertyImage
	extra = 0


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
	list_display = ('title', 'owner', 'city', 'base_price', 'status', 'is_featured')
	list_filter = ('status', 'is_featured', 'property_type', 'city')
	search_fields = ('title', 'city', 'address', 'owner__username', 'owner__email')
	filter_horizontal = ('amenities',)
	inlines = (PropertyImageInline,)


class PaymentInline(admin.TabularInline):
	model = Payment
	extra = 0
	readonly_fields = ('payment_reference', 'transaction_type', 'dr_amount', 'cr_amount', 'status', 'created_at')


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
	list_display = ('booking_reference', 'property', 'guest', 'check_in_date', 'check_out_date', 'status', 'payment_status', 'total_amount')
	list_filter = ('status', 'payment_status')
	search_fields = ('booking_reference', 'guest__email', 'property__title')
	date_hierarchy = 'check_in_date'
	inlines = (PaymentInline,)


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
	list_display = ('payment_reference', 'booking', 'transaction_type', 'dr_amount', 'cr_amount', 'status', 'created_at')
	list_filter = ('transaction_type', 'status')
	search_fields = ('payment_reference', 'booking__booking_reference')


@admin.register(OwnerPayout)
class OwnerPayoutAdmin(admin.ModelAdmin):
	list_display = ('payout_reference', 'owner', 'amount', 'payment_status', 'payment_date')
	list_filter = ('payment_status',)


@admin.register(SystemSetting)
class SystemSettingAdmin(admin.ModelAdmin):
	list_display = ('setting_key', 'setting_value', 'setting_type', 'is_public')
	search_fields = ('setting_key',)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
	list_display = ('property', 'guest', 'rating', 'status', 'created_at')
	list_filter = ('status', 'rating')


admin.site.register(PropertyOwnerProfile)
admin.site.register(PropertyType)
admin.site.register(Amenity)
admin.site.register(DisplayCategory)
admin.site.register(PropertyReport)
admin.site.register(Coupon)
admin.site.register(AdminEarning)
admin.site.register(Conversation)
admin.site.register(RewardsPointSlot)
admin.site.register(RewardsPointSettings)
admin.site.register(MemberStatusTier)
admin.site.register(UserRewardsPoints)
admin.site.register(RewardsPointTransaction)
